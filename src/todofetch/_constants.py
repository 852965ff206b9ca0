"""Internal constants shared across the library."""

#: Inbound notification that triggers one fetch cycle.
FETCH_NOTIFICATION = "FETCH_TODOIST"
#: Outbound notification carrying the task collection.
TASKS_NOTIFICATION = "TASKS"
#: Outbound notification carrying ``{"error": message}``.
FETCH_ERROR_NOTIFICATION = "FETCH_ERROR"

#: Wildcard sync token: always request a full sync.
SYNC_TOKEN_ALL = "*"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
CACHE_CONTROL = "no-cache"

HTTP_DEPENDENCY = "aiohttp"
MARKDOWN_DEPENDENCY = "markdown"
