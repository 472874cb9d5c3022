"""
utils/constants.py

Purpose: Centralized static content

- All user-facing WhatsApp messages for the onboarding flow
- Keywords recognised in inbound messages
- Defaults for records created during onboarding

(Prevents hardcoding across the codebase)
"""

# ============================================================
# KEYWORDS
# ============================================================

ONBOARDING_KEYWORD = "onboarding"

# ============================================================
# ONBOARDING START
# ============================================================

NEW_USER_ONBOARDING_MESSAGE = """🚀 *FinSplit Onboarding*

In 1 minute you activate your account, create a group and log your first expense.

🔗 *Create my account now:*
{onboarding_url}

⏱️ This link is valid for 15 minutes.

When you're done, come back here and I'll show you how to send a receipt! 📸"""

EXISTING_USER_ONBOARDING_MESSAGE = """🔄 *Guided setup*

Hi {name}! I'll walk you through the setup again.

🔗 *Open guided setup:*
{onboarding_url}

⏱️ This link is valid for 15 minutes.

You can create new groups and categories and learn every feature! 🎯"""

PROMOTIONAL_MESSAGE = """👋 *Welcome to FinSplit!*

Split and track shared expenses straight from WhatsApp:
📸 Send a receipt photo and the AI fills in the expense
👥 Share costs with family and friends
📊 See who owes what at any time

Type *onboarding* to create your free account."""

HELP_MESSAGE = """🤖 *FinSplit commands*

🔄 *onboarding* - Redo the guided setup

• Send a *receipt* (photo) - the AI organises it for you
• Type *balance* - see what you owe and are owed
• Type *groups* - manage your groups
• Type *report* - summary of your finances"""

# ============================================================
# ONBOARDING RETURN
# ============================================================

ONBOARDING_COMPLETED_MESSAGE = """🎉 Signup complete!

Your group "{group_name}" and the category "{category_name}" are ready.

📸 Send a photo of your first receipt here whenever you like.

The AI will extract automatically:
• Expense amount
• Date and merchant
• Suggested category

Just confirm and you're done! 🚀"""

ONBOARDING_PENDING_MESSAGE = """⏳ Almost there!

Your signup is at: *{step_name}*.
Open the signup page again to {next_action}.

{progress}"""

TOKEN_NOT_FOUND_MESSAGE = "❌ Token not found. Please restart the signup by typing *onboarding*."

SESSION_INVALID_MESSAGE = "❌ Your signup link is invalid or has expired. Type *onboarding* to get a new one."

SIGNUP_NOT_FOUND_MESSAGE = "❌ Signup not found. Type *onboarding* to start again."

GENERIC_ERROR_MESSAGE = "❌ Something went wrong. Try sending a receipt photo directly or type *onboarding*."

# ============================================================
# ONBOARDING DEFAULTS
# ============================================================

DEFAULT_GROUP_NAME = "Main group"
DEFAULT_CATEGORY_NAME = "Food"
DEFAULT_CATEGORY_COLOR = "#FF6B6B"
ONBOARDING_GROUP_DESCRIPTION = "Group created during onboarding"

TENANT_DEFAULTS = {
    "type": "PERSONAL",
    "plan": "FREE",
    "max_groups": 1,
    "max_members": 5,
    "has_whatsapp": False,
    "credits": 0,
}

GROUP_TYPES = ("PERSONAL", "FAMILY", "BUSINESS")

# ============================================================
# AUDIT ACTIONS
# ============================================================

AUDIT_USER_ONBOARDING_START = "USER_ONBOARDING_START"
AUDIT_GROUP_CREATED = "GROUP_CREATED_ONBOARDING"
AUDIT_CATEGORY_CREATED = "CATEGORY_CREATED_ONBOARDING"
AUDIT_ONBOARDING_COMPLETED = "ONBOARDING_COMPLETED"
