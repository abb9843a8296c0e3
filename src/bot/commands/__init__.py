# src/bot/commands/__init__.py

from .utils import start_command, help_command
from .analysis import analysis_command
from .debts import (
    chart_command,
    list_debts_command,
    refresh_command,
    summary_command,
)

ALL_COMMANDS = [
    start_command,
    help_command,
    list_debts_command,
    summary_command,
    chart_command,
    refresh_command,
    analysis_command,
]
