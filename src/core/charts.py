# src/core/charts.py
import io
from typing import List, Union

import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
import pandas as pd

from src.core.models import Debt, Situacao

# Configurações globais para os gráficos (cores, fontes, etc.)
plt.style.use('seaborn-v0_8-darkgrid')
plt.rcParams['font.family'] = 'sans-serif'
plt.rcParams['font.size'] = 10
plt.rcParams['axes.labelsize'] = 12
plt.rcParams['axes.titlesize'] = 14
plt.rcParams['legend.fontsize'] = 10

COLORS = {
    Situacao.ABERTA.value: '#4f46e5',  # Indigo, dívida em aberto
    Situacao.FECHADA.value: '#10b981',  # Verde, já quitado
}


def debts_to_dataframe(debts: List[Debt]) -> pd.DataFrame:
    rows = [
        {
            'credor': d.credor or 'Sem credor',
            'situacao': d.situacao.value,
            'valor': d.valor,
            'data_limite': d.data_limite,
        }
        for d in debts
    ]
    return pd.DataFrame(rows, columns=['credor', 'situacao', 'valor', 'data_limite'])


def summarize_by_creditor(debts: List[Debt]) -> pd.DataFrame:
    """Soma os valores por credor, com uma coluna para cada situação (Aberta/Fechada)."""
    df = debts_to_dataframe(debts)
    situacoes = [Situacao.ABERTA.value, Situacao.FECHADA.value]
    if df.empty:
        return pd.DataFrame(columns=situacoes)

    summary = df.groupby(['credor', 'situacao'])['valor'].sum().unstack(fill_value=0)
    summary = summary.reindex(columns=situacoes, fill_value=0)
    return summary.sort_values(by=Situacao.ABERTA.value, ascending=True)


def generate_debts_chart(debts: List[Debt]) -> Union[io.BytesIO, None]:
    """Gera um gráfico de barras com o valor em aberto e quitado por credor."""
    summary = summarize_by_creditor(debts)
    if summary.empty:
        return None

    fig, ax = plt.subplots(figsize=(10, max(4, 0.6 * len(summary) + 2)))
    summary.plot(
        kind='barh',
        stacked=True,
        ax=ax,
        color=[COLORS[c] for c in summary.columns],
    )

    total_aberto = summary[Situacao.ABERTA.value].sum()
    total_pago = summary[Situacao.FECHADA.value].sum()
    ax.set_title(
        f'Dívidas por Credor (em aberto: R${total_aberto:.2f} | pago: R${total_pago:.2f})',
        fontweight='bold',
    )
    ax.set_xlabel('Valor (R$)')
    ax.set_ylabel('Credor')
    ax.legend(['Em aberto', 'Quitado'], title='Situação')
    ax.xaxis.set_major_formatter(mticker.FormatStrFormatter('R$%.0f'))

    for container in ax.containers:
        ax.bar_label(container, fmt='R$%.2f', fontsize=8, label_type='center')

    fig.tight_layout()

    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=150)
    buf.seek(0)
    plt.close(fig)
    return buf
