"""
Keyword Taxonomies
==================
Read-only classification tables shared by every extraction run.

Tables are tuples of frozen records so they can be shared across threads
and swapped for fixture taxonomies in tests. Order matters everywhere:
the first matching entry wins ties.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Discipline:
    """A discipline and the keywords that vote for it."""
    name: str
    keywords: tuple[str, ...]


@dataclass(frozen=True)
class ThemeKeyword:
    """Keyword found in a question's opening lines -> theme name."""
    keyword: str
    theme: str


@dataclass(frozen=True)
class BoardOverride:
    """Institution mentioned in a document -> board that runs its exams."""
    marker: str
    board: str


# ─── Disciplines ──────────────────────────────────────────────────────────────

DISCIPLINES: tuple[Discipline, ...] = (
    Discipline("Conhecimentos Bancários", (
        "bancário", "banco", "crédito", "operações bancárias",
        "sistema financeiro nacional", "sfn", "bacen", "cvm", "tesouro",
        "títulos públicos", "capital de giro", "spread", "compulsório",
        "open market", "selic", "copom",
    )),
    Discipline("Matemática Financeira", (
        "juros simples", "juros compostos", "montante", "taxa de juros",
        "desconto", "amortização", "prestação", "sac", "price",
        "valor presente", "valor futuro", "vpn", "tir", "capitalização",
        "equivalência",
    )),
    Discipline("Matemática", (
        "equação", "função", "álgebra", "geometria", "trigonometria",
        "derivada", "integral", "logaritmo", "exponencial", "progressão",
        "matriz", "determinante",
    )),
    Discipline("Probabilidade e Estatística", (
        "probabilidade", "estatística", "média", "mediana", "moda",
        "desvio padrão", "variância", "distribuição", "amostra",
        "frequência", "combinatória", "permutação", "arranjo", "binomial",
    )),
    Discipline("Informática", (
        "computador", "software", "hardware", "internet", "navegador",
        "windows", "linux", "word", "excel", "powerpoint", "rede",
        "segurança da informação", "virus", "firewall", "backup",
        "sistema operacional",
    )),
    Discipline("Tecnologia da Informação", (
        "ti", "programação", "banco de dados", "sql", "algoritmo", "lgpd",
        "governança de ti", "itil", "cobit", "cloud", "virtualização",
        "devops", "api", "microsserviços", "containers",
    )),
    Discipline("Vendas e Negociação", (
        "vendas", "negociação", "cliente", "atendimento", "relacionamento",
        "marketing", "mercado", "produto", "serviço", "fidelização",
        "prospecção", "pós-venda", "cross-selling", "up-selling", "crm",
    )),
    Discipline("Língua Portuguesa", (
        "gramática", "ortografia", "sintaxe", "morfologia", "semântica",
        "texto", "redação", "interpretação", "coesão", "coerência",
        "concordância", "regência", "pontuação", "crase", "verbo",
        "pronome",
    )),
    Discipline("Língua Inglesa", (
        "english", "inglês", "vocabulary", "grammar", "reading",
        "comprehension", "verb", "noun", "adjective", "translation",
    )),
)


# ─── Themes ───────────────────────────────────────────────────────────────────

THEME_KEYWORDS: tuple[ThemeKeyword, ...] = (
    ThemeKeyword("juros simples", "Juros Simples"),
    ThemeKeyword("juros compostos", "Juros Compostos"),
    ThemeKeyword("desconto", "Descontos"),
    ThemeKeyword("amortização", "Amortização"),
    ThemeKeyword("montante", "Montante"),
    ThemeKeyword("taxa de juros", "Taxas de Juros"),
    ThemeKeyword("porcentagem", "Porcentagem"),
    ThemeKeyword("probabilidade", "Probabilidade"),
    ThemeKeyword("estatística", "Estatística"),
    ThemeKeyword("média", "Medidas de Tendência Central"),
    ThemeKeyword("sistema financeiro", "Sistema Financeiro Nacional"),
    ThemeKeyword("banco central", "Banco Central"),
    ThemeKeyword("bacen", "Banco Central"),
    ThemeKeyword("operações bancárias", "Operações Bancárias"),
    ThemeKeyword("crédito", "Operações de Crédito"),
    ThemeKeyword("interpretação de texto", "Interpretação de Texto"),
    ThemeKeyword("gramática", "Gramática"),
    ThemeKeyword("concordância", "Concordância"),
    ThemeKeyword("regência", "Regência"),
    ThemeKeyword("crase", "Crase"),
    ThemeKeyword("pontuação", "Pontuação"),
    ThemeKeyword("excel", "Excel"),
    ThemeKeyword("word", "Word"),
    ThemeKeyword("windows", "Windows"),
    ThemeKeyword("internet", "Internet"),
    ThemeKeyword("segurança da informação", "Segurança da Informação"),
    ThemeKeyword("hardware", "Hardware"),
    ThemeKeyword("software", "Software"),
    ThemeKeyword("rede", "Redes de Computadores"),
    ThemeKeyword("atendimento", "Atendimento ao Cliente"),
    ThemeKeyword("vendas", "Vendas"),
    ThemeKeyword("negociação", "Negociação"),
    ThemeKeyword("marketing", "Marketing"),
    ThemeKeyword("fidelização", "Fidelização de Clientes"),
)


# ─── Exam Boards ──────────────────────────────────────────────────────────────

KNOWN_BOARDS: tuple[str, ...] = (
    "CESGRANRIO", "FCC", "FGV", "CESPE", "CEBRASPE", "VUNESP", "IBFC",
    "FUNDATEC", "AOCP", "CONSULPLAN", "IDECAN", "FADESP", "FEPESE",
    "FUNCAB", "IADES", "INSTITUTO ACESSO", "FUNDEP", "COPESE",
)

BOARD_OVERRIDES: tuple[BoardOverride, ...] = (
    BoardOverride("BANCO DO BRASIL", "CESGRANRIO"),
    BoardOverride("CAIXA", "CESGRANRIO"),
)
