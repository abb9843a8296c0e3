import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from telegram.ext import ConversationHandler

from src.bot.commands import analysis_command, chart_command, list_debts_command, summary_command
from src.bot.handlers import (
    ASKING_ADJUSTMENT_VALUE,
    ASKING_DATA_LIMITE,
    ASKING_DELETE_CONFIRMATION,
    ASKING_FORM_CONFIRMATION,
    ASKING_OBS,
    ASKING_SETTLE_CONFIRMATION,
    ASKING_VALOR,
    cancel_command,
    delete_command,
    edit_debt_command,
    handle_adjustment_value,
    handle_credor,
    handle_data_limite,
    handle_delete_confirmation,
    handle_descricao,
    handle_form_confirmation,
    handle_obs,
    handle_settle_confirmation,
    handle_valor,
    increase_command,
    new_debt_command,
    settle_command,
)
from src.bot.session import CONTROLLER_KEY, FORM_KEY
from src.tests.fake_store import FakeStore, sample_rows


class BotTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.store = FakeStore(sample_rows())
        patcher = self.store.patch()
        patcher.start()
        self.addCleanup(patcher.stop)

        self.context = MagicMock()
        self.context.bot_data = {"supabase_client": MagicMock()}
        self.context.chat_data = {}
        self.context.user_data = {}
        self.context.args = []

    def make_update(self, text=""):
        update = MagicMock()
        update.message.text = text
        update.message.reply_text = AsyncMock()
        update.message.reply_photo = AsyncMock()
        return update

    def replies(self, update):
        return [c.args[0] for c in update.message.reply_text.call_args_list]

    async def send(self, handler, text="", args=None):
        self.context.args = args or []
        update = self.make_update(text)
        state = await handler(update, self.context)
        return state, update

    @property
    def controller(self):
        return self.context.chat_data[CONTROLLER_KEY]


class TestListing(BotTestCase):
    async def test_list_shows_open_debts_with_actions(self):
        _, update = await self.send(list_debts_command)

        text = self.replies(update)[0]
        self.assertIn("[ATIVAS (2)]", text)
        self.assertIn("1. Cartão (Nubank): R$ 500,00", text)
        self.assertIn("/quitar 1", text)
        self.assertNotIn("Luz", text)

    async def test_closed_debts_only_offer_delete(self):
        _, update = await self.send(list_debts_command, args=["quitadas"])

        text = self.replies(update)[0]
        self.assertIn("1. Luz (Enel)", text)
        self.assertIn("/excluir 1", text)
        self.assertNotIn("/quitar 1", text)

    async def test_unknown_filter(self):
        _, update = await self.send(list_debts_command, args=["vencidas"])
        self.assertIn("Uso: /dividas", self.replies(update)[0])

    async def test_summary(self):
        _, update = await self.send(summary_command)
        text = self.replies(update)[0]
        self.assertIn("Dívida Total: R$ 1.500,00", text)
        self.assertIn("Total Pago: R$ 300,00", text)
        self.assertIn("Pendências: 2", text)


class TestSettleFlow(BotTestCase):
    async def test_settle_with_confirmation(self):
        state, _ = await self.send(settle_command, args=["1"])
        self.assertEqual(state, ASKING_SETTLE_CONFIRMATION)

        state, update = await self.send(handle_settle_confirmation, "Sim ✅")

        self.assertEqual(state, ConversationHandler.END)
        self.assertEqual(self.store.rows["d1"]["situacao"], "Fechada")
        self.assertIn("quitada", self.replies(update)[-1])

    async def test_settle_is_unavailable_for_closed_debt(self):
        await self.send(list_debts_command, args=["todas"])

        # Na aba "todas" a ordem é d2 (Fechada), d1, d3
        state, update = await self.send(settle_command, args=["1"])

        self.assertEqual(state, ConversationHandler.END)
        self.assertIn("já está quitada", self.replies(update)[0])
        self.assertIsNone(self.controller.pending_modal)
        self.assertEqual(self.store.calls_of("update"), [])

    async def test_settle_declined(self):
        await self.send(settle_command, args=["1"])
        state, _ = await self.send(handle_settle_confirmation, "não")

        self.assertEqual(state, ConversationHandler.END)
        self.assertEqual(self.store.rows["d1"]["situacao"], "Aberta")

    async def test_settle_failure_reports_error(self):
        self.store.fail.add("update")
        await self.send(settle_command, args=["1"])

        state, update = await self.send(handle_settle_confirmation, "sim")

        self.assertEqual(state, ConversationHandler.END)
        self.assertIn("⚠️ Erro ao quitar: falha ao atualizar", self.replies(update))
        self.assertEqual(self.controller.find("d1").situacao.value, "Aberta")

    async def test_invalid_position(self):
        state, update = await self.send(settle_command, args=["9"])
        self.assertEqual(state, ConversationHandler.END)
        self.assertIn("Não existe dívida número 9", self.replies(update)[0])

    async def test_missing_position(self):
        state, update = await self.send(settle_command)
        self.assertEqual(state, ConversationHandler.END)
        self.assertIn("Informe o número", self.replies(update)[0])


class TestDeleteFlow(BotTestCase):
    async def test_delete_with_confirmation(self):
        await self.send(delete_command, args=["2"])
        state, _ = await self.send(handle_delete_confirmation, "sim")

        self.assertEqual(state, ConversationHandler.END)
        self.assertNotIn("d3", self.store.rows)


class TestPositionsFollowLastListing(BotTestCase):
    async def test_positions_do_not_shift_after_settling(self):
        await self.send(list_debts_command)
        await self.send(settle_command, args=["1"])
        await self.send(handle_settle_confirmation, "sim")

        # d1 saiu da aba de ativas, mas o número 2 continua sendo d3
        state, _ = await self.send(delete_command, args=["2"])
        self.assertEqual(state, ASKING_DELETE_CONFIRMATION)
        self.assertEqual(self.controller.modal_target, "d3")

    async def test_removed_debt_is_not_resolved(self):
        await self.send(list_debts_command)
        await self.send(delete_command, args=["1"])
        await self.send(handle_delete_confirmation, "sim")

        state, update = await self.send(settle_command, args=["1"])

        self.assertEqual(state, ConversationHandler.END)
        self.assertIn("não existe mais", self.replies(update)[0])
        self.assertEqual(self.store.calls_of("update"), [])


class TestAdjustmentFlow(BotTestCase):
    async def test_increase(self):
        state, _ = await self.send(increase_command, args=["1"])
        self.assertEqual(state, ASKING_ADJUSTMENT_VALUE)

        state, update = await self.send(handle_adjustment_value, "150,00")

        self.assertEqual(state, ConversationHandler.END)
        self.assertEqual(self.store.calls_of("update"), [("update", "d1", {"valor": 650.0})])
        self.assertIn("R$ 650,00", self.replies(update)[-1])

    async def test_invalid_amount_keeps_dialog_open(self):
        await self.send(increase_command, args=["1"])
        state, _ = await self.send(handle_adjustment_value, "abc")

        self.assertEqual(state, ASKING_ADJUSTMENT_VALUE)
        self.assertEqual(self.store.calls_of("update"), [])

    async def test_remote_failure_keeps_dialog_open(self):
        self.store.fail.add("update")
        await self.send(increase_command, args=["1"])

        state, update = await self.send(handle_adjustment_value, "100")

        self.assertEqual(state, ASKING_ADJUSTMENT_VALUE)
        self.assertIn("⚠️ Erro ao ajustar: falha ao atualizar", self.replies(update))
        self.assertEqual(self.controller.find("d1").valor, 500.0)

    async def test_cancel_closes_dialog(self):
        await self.send(increase_command, args=["1"])
        state, _ = await self.send(cancel_command)

        self.assertEqual(state, ConversationHandler.END)
        self.assertIsNone(self.controller.pending_modal)


class TestDebtForm(BotTestCase):
    async def test_create_debt(self):
        await self.send(new_debt_command)
        await self.send(handle_descricao, "Celular")
        state, _ = await self.send(handle_credor, "Loja")
        self.assertEqual(state, ASKING_VALOR)

        state, _ = await self.send(handle_valor, "0")
        self.assertEqual(state, ASKING_VALOR)

        state, _ = await self.send(handle_valor, "1.500,00")
        self.assertEqual(state, ASKING_DATA_LIMITE)

        state, _ = await self.send(handle_data_limite, "15/08/2025")
        self.assertEqual(state, ASKING_OBS)

        state, _ = await self.send(handle_obs, "-")
        self.assertEqual(state, ASKING_FORM_CONFIRMATION)

        state, _ = await self.send(handle_form_confirmation, "Sim ✅")

        self.assertEqual(state, ConversationHandler.END)
        inserts = self.store.calls_of("insert")
        self.assertEqual(len(inserts), 1)
        record = inserts[0][1]
        self.assertEqual(record["valor"], 1500.0)
        self.assertEqual(record["data_limite"], "2025-08-15")
        self.assertEqual(record["obs"], "")
        self.assertEqual(record["situacao"], "Aberta")

    async def test_form_lives_with_the_chat_controller(self):
        await self.send(edit_debt_command, args=["1"])
        self.assertEqual(self.context.chat_data[FORM_KEY]["descricao"], "Cartão")
        self.assertEqual(self.context.user_data, {})

        await self.send(cancel_command)
        self.assertNotIn(FORM_KEY, self.context.chat_data)
        self.assertIsNone(self.controller.modal_target)

        await self.send(new_debt_command)
        state, _ = await self.send(handle_descricao, "Celular")
        await self.send(handle_credor, "Loja")
        self.assertEqual(self.context.chat_data[FORM_KEY], {"descricao": "Celular", "credor": "Loja"})

    async def test_invalid_date_keeps_asking(self):
        await self.send(new_debt_command)
        state, update = await self.send(handle_data_limite, "amanhã")
        self.assertEqual(state, ASKING_DATA_LIMITE)
        self.assertIn("Data inválida", self.replies(update)[0])

    async def test_insert_failure_allows_retry(self):
        self.store.fail.add("insert")
        await self.send(new_debt_command)
        for handler, text in (
            (handle_descricao, "Celular"),
            (handle_credor, "Loja"),
            (handle_valor, "100"),
            (handle_data_limite, "sem"),
            (handle_obs, "-"),
        ):
            await self.send(handler, text)

        state, update = await self.send(handle_form_confirmation, "sim")
        self.assertEqual(state, ASKING_FORM_CONFIRMATION)
        self.assertIn("⚠️ Erro ao salvar dívida: falha ao inserir", self.replies(update))

        self.store.fail.clear()
        state, _ = await self.send(handle_form_confirmation, "sim")
        self.assertEqual(state, ConversationHandler.END)
        self.assertEqual(len(self.store.calls_of("insert")), 2)

    async def test_edit_skips_amount_and_keeps_fields(self):
        state, _ = await self.send(edit_debt_command, args=["1"])

        await self.send(handle_descricao, ".")
        state, _ = await self.send(handle_credor, "Nubank S.A.")
        self.assertEqual(state, ASKING_DATA_LIMITE)
        await self.send(handle_data_limite, ".")
        await self.send(handle_obs, "renegociada")
        state, _ = await self.send(handle_form_confirmation, "sim")

        self.assertEqual(state, ConversationHandler.END)
        _, debt_id, fields = self.store.calls_of("update")[0]
        self.assertEqual(debt_id, "d1")
        self.assertNotIn("valor", fields)
        self.assertEqual(fields["descricao"], "Cartão")
        self.assertEqual(fields["credor"], "Nubank S.A.")
        self.assertEqual(fields["data_limite"], "2025-07-10")
        self.assertEqual(fields["obs"], "renegociada")


class TestAnalysisAndChart(BotTestCase):
    @patch("src.core.ai.ask_gemini", return_value="Quite o cartão primeiro.")
    async def test_analysis_command(self, mock_ask_gemini):
        _, update = await self.send(analysis_command)
        self.assertEqual(self.replies(update)[-1], "Quite o cartão primeiro.")

    @patch("src.bot.commands.debts.charts.generate_debts_chart", return_value=None)
    async def test_chart_without_data(self, mock_chart):
        _, update = await self.send(chart_command)
        update.message.reply_photo.assert_not_called()
        self.assertIn("Ainda não há dívidas", self.replies(update)[-1])
