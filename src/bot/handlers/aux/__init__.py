from .confirmation import (
    CONFIRMATION_KEYBOARD,
    ask_yes_no,
    is_no,
    is_yes,
)
from .send_form_summary import send_form_summary
