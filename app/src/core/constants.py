OWNER_ID_HEADER = "X-Owner-Id"

REQUEST_ID_HEADER = "X-Request-ID"

CURRENT_USER_ALIAS = "me"
