"""
Common Error Constants

Shared error messages for routers and services.
"""

# Auth errors
ERROR_UNAUTHORIZED = "Unauthorized"
ERROR_STAFF_REQUIRED = "Admin or staff access required"
ERROR_ADMIN_KEY_INVALID = "Invalid admin API key"

# Cart errors
ERROR_CATALOG_ITEM_NOT_FOUND = "Product not found"

# Membership errors
ERROR_MEMBERSHIP_NOT_FOUND = "Membership not found"
ERROR_MEMBERSHIP_INACTIVE = "Invalid or inactive membership"
ERROR_CHECK_IN_FORBIDDEN = "Not your membership"
ERROR_PLAN_NOT_FOUND = "Membership plan not found"
ERROR_PUNCH_CARD_NOT_FOUND = "Punch card not found"
ERROR_PUNCH_CARD_FORBIDDEN = "Not your punch card"

# Messaging errors
ERROR_SMS_FAILED = "Failed to send SMS message"
ERROR_SMS_NOT_CONFIGURED = "SMS delivery is not configured"
ERROR_RESET_CODE_INVALID = "Invalid or expired reset code"

# QR errors
ERROR_QR_FAILED = "Failed to generate QR code"

# Generic errors
ERROR_INTERNAL = "Internal server error"
