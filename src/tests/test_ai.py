# tests/test_ai.py
import datetime
import unittest
from unittest.mock import MagicMock, patch

from src.core import ai
from src.core.errors import AnalysisError
from src.core.models import Debt, Situacao


class TestArtificialIntelligence(unittest.TestCase):

    def setUp(self):
        self.debts = [
            Debt(id="d1", descricao="Cartão", credor="Nubank", valor=500.0,
                 data_limite=datetime.date(2025, 7, 10)),
            Debt(id="d2", descricao="Empréstimo", credor="Tio João", valor=1200.5),
        ]

    # --- Testes para ask_gemini ---
    @patch('src.core.ai.genai.GenerativeModel')
    def test_ask_gemini_success(self, mock_model_class):
        mock_model = mock_model_class.return_value
        mock_model.generate_content.return_value = MagicMock(parts=["parte"], text="  Pague o cartão primeiro.  ")

        response = ai.ask_gemini("Olá")

        self.assertEqual(response, "Pague o cartão primeiro.")
        mock_model.generate_content.assert_called_once_with("Olá")
        _, kwargs = mock_model_class.call_args
        self.assertEqual(kwargs['system_instruction'], ai.SYSTEM_INSTRUCTION)
        self.assertEqual(kwargs['generation_config'], {"temperature": ai.GEMINI_TEMPERATURE})
        self.assertEqual(kwargs['model_name'], ai.GEMINI_MODEL)

    @patch('src.core.ai.genai.GenerativeModel')
    def test_ask_gemini_blocked_response_returns_empty(self, mock_model_class):
        mock_model_class.return_value.generate_content.return_value = MagicMock(parts=[])
        self.assertEqual(ai.ask_gemini("Olá"), "")

    @patch('src.core.ai.genai.GenerativeModel')
    def test_ask_gemini_failure_raises_analysis_error(self, mock_model_class):
        mock_model_class.return_value.generate_content.side_effect = Exception("403 API key invalid")
        with self.assertRaises(AnalysisError):
            ai.ask_gemini("Olá")

    # --- Testes para analyze_debts ---
    @patch('src.core.ai.ask_gemini')
    def test_analyze_debts_empty_list_skips_gemini(self, mock_ask_gemini):
        result = ai.analyze_debts([])
        self.assertEqual(result, ai.NO_DEBTS_MESSAGE)
        mock_ask_gemini.assert_not_called()

    @patch('src.core.ai.ask_gemini')
    def test_analyze_debts_returns_text_verbatim(self, mock_ask_gemini):
        mock_ask_gemini.return_value = "1. Quite o cartão.\n2. Negocie o empréstimo."
        result = ai.analyze_debts(self.debts)
        self.assertEqual(result, "1. Quite o cartão.\n2. Negocie o empréstimo.")
        mock_ask_gemini.assert_called_once()

    @patch('src.core.ai.ask_gemini')
    def test_analyze_debts_prompt_lists_every_debt(self, mock_ask_gemini):
        mock_ask_gemini.return_value = "ok"
        ai.analyze_debts(self.debts)

        prompt = mock_ask_gemini.call_args[0][0]
        self.assertIn("- Cartão (Nubank): R$ 500.00, Vencimento: 2025-07-10", prompt)
        self.assertIn("- Empréstimo (Tio João): R$ 1200.50, Vencimento: Sem vencimento", prompt)
        self.assertIn("LISTA DE DÍVIDAS", prompt)

    @patch('src.core.ai.ask_gemini')
    def test_analyze_debts_absorbs_errors(self, mock_ask_gemini):
        mock_ask_gemini.side_effect = AnalysisError("connection reset")
        result = ai.analyze_debts(self.debts)
        self.assertEqual(result, ai.ANALYSIS_ERROR_MESSAGE)

    @patch('src.core.ai.ask_gemini')
    def test_analyze_debts_empty_answer_uses_fallback(self, mock_ask_gemini):
        mock_ask_gemini.return_value = ""
        result = ai.analyze_debts(self.debts)
        self.assertEqual(result, ai.EMPTY_RESPONSE_MESSAGE)

    @patch('src.core.ai.ask_gemini')
    def test_analyze_debts_includes_closed_debts(self, mock_ask_gemini):
        mock_ask_gemini.return_value = "ok"
        closed = Debt(id="d3", descricao="Luz", credor="Enel", valor=90.0, situacao=Situacao.FECHADA)
        ai.analyze_debts([closed])
        self.assertIn("- Luz (Enel): R$ 90.00", mock_ask_gemini.call_args[0][0])
