# insumos/config.py
"""
Configurações globais e valores padrão do controle de insumos.
"""

import os
from dataclasses import dataclass


# Caminho padrão do banco de dados SQLite (sobrescrito por INSUMOS_DB)
DB_PATH = os.environ.get("INSUMOS_DB", os.path.join(os.getcwd(), "insumos.db"))

# Quantidade de etiquetas em um pacote de cartões
UNIDADES_POR_PACOTE_CARTAO = 5000

# Logs em arquivo (desligados por padrão)
LOGGING_ENABLED = os.environ.get("INSUMOS_LOGGING", "0") == "1"


@dataclass
class DefaultConfig:
    """Valores padrão para parâmetros do sistema."""
    itens_por_pagina: int = 20
    timeout_lock_s: float = 30.0  # espera máxima pelo lock de escrita do SQLite
    limite_saidas_recentes: int = 50


# Instância global dos valores padrão
DEFAULTS = DefaultConfig()
