# src/core/ai.py
import sys
from typing import List

import google.generativeai as genai
from google.generativeai.types import HarmCategory, HarmBlockThreshold

from src.config import GOOGLE_API_KEY, GEMINI_MODEL, GEMINI_TEMPERATURE
from src.core.errors import AnalysisError
from src.core.models import Debt

genai.configure(api_key=GOOGLE_API_KEY)

safety_settings = {
    HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_NONE,
    HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_NONE,
    HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_NONE,
    HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_NONE,
}

SYSTEM_INSTRUCTION = (
    "Você é um consultor financeiro inteligente chamado 'DebtManager AI'. "
    "Sua linguagem deve ser clara, profissional e encorajadora em português do Brasil."
)

NO_DEBTS_MESSAGE = (
    "Você ainda não possui dívidas cadastradas. "
    "Comece adicionando uma para receber orientações."
)
EMPTY_RESPONSE_MESSAGE = (
    "Não foi possível gerar uma análise no momento. Tente novamente mais tarde."
)
ANALYSIS_ERROR_MESSAGE = (
    "Ops! Tivemos um problema ao conectar com nossa inteligência artificial. "
    "Por favor, verifique se sua chave API está configurada."
)

PROMPT_TEMPLATE = """
    Como um consultor financeiro especialista, analise a seguinte lista de dívidas de um usuário e forneça uma estratégia curta, direta e motivadora de 3 a 4 parágrafos.
    Destaque qual dívida deve ser priorizada (bola de neve ou avalancha) e dê dicas práticas de economia.

    LISTA DE DÍVIDAS:
    {debt_list}
    """


def ask_gemini(prompt: str, model: str = GEMINI_MODEL) -> str:
    """
    Envia um prompt para o Gemini com a instrução de sistema do consultor.
    Retorna o texto gerado (string vazia se a resposta vier vazia ou bloqueada).
    Levanta AnalysisError em qualquer falha de transporte ou da API.
    """
    try:
        model_instance = genai.GenerativeModel(
            model_name=model,
            safety_settings=safety_settings,
            system_instruction=SYSTEM_INSTRUCTION,
            generation_config={"temperature": GEMINI_TEMPERATURE},
        )
        response = model_instance.generate_content(prompt)

        if not response.parts:
            print(f"DEBUG Gemini: Resposta vazia ou bloqueada. Raw: {response}")
            return ""

        return response.text.strip()
    except Exception as e:
        raise AnalysisError(str(e)) from e


def format_debt_line(debt: Debt) -> str:
    vencimento = debt.data_limite.isoformat() if debt.data_limite else "Sem vencimento"
    return f"- {debt.descricao} ({debt.credor}): R$ {debt.valor:.2f}, Vencimento: {vencimento}"


def build_analysis_prompt(debts: List[Debt]) -> str:
    debt_list = "\n".join(format_debt_line(d) for d in debts)
    return PROMPT_TEMPLATE.format(debt_list=debt_list)


def analyze_debts(debts: List[Debt]) -> str:
    """Pede ao Gemini uma estratégia de quitação para a lista de dívidas atual."""
    if not debts:
        return NO_DEBTS_MESSAGE

    prompt = build_analysis_prompt(debts)
    try:
        text = ask_gemini(prompt)
    except AnalysisError as e:
        print(f"ERROR: Gemini API Error: {e.message}", file=sys.stderr)
        return ANALYSIS_ERROR_MESSAGE

    return text or EMPTY_RESPONSE_MESSAGE
