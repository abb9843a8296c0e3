# --- Estados da Conversa ---
ASKING_DESCRICAO = 0
ASKING_CREDOR = 1
ASKING_VALOR = 2
ASKING_DATA_LIMITE = 3
ASKING_OBS = 4
ASKING_FORM_CONFIRMATION = 5
ASKING_SETTLE_CONFIRMATION = 6
ASKING_DELETE_CONFIRMATION = 7
ASKING_ADJUSTMENT_VALUE = 8

from .handle_adjustment import decrease_command, handle_adjustment_value, increase_command
from .handle_cancel import cancel_command
from .handle_debt_form import (
    edit_debt_command,
    handle_credor,
    handle_data_limite,
    handle_descricao,
    handle_form_confirmation,
    handle_obs,
    handle_valor,
    new_debt_command,
)
from .handle_delete import delete_command, handle_delete_confirmation
from .handle_settle import handle_settle_confirmation, settle_command


ALL_HANDLERS = {
    handle_descricao,
    handle_credor,
    handle_valor,
    handle_data_limite,
    handle_obs,
    handle_form_confirmation,
    handle_settle_confirmation,
    handle_delete_confirmation,
    handle_adjustment_value,
}
