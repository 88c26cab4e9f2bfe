"""
Sistema de logging para as movimentações de insumos.

Configura um logger em arquivo por assunto (transações, entradas, saídas,
produção, banco e sistema). Os arquivos só são criados na primeira escrita
e todo o registro fica desligado enquanto ``ENABLE_LOGGING`` for falso.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from insumos.config import LOGGING_ENABLED


# Flag global para habilitar/desabilitar logging
ENABLE_LOGGING = LOGGING_ENABLED
# Flag global para habilitar/desabilitar prints/output
ENABLE_OUTPUT = False


def print_system(*args, **kwargs):
    """Print controlado pelo ENABLE_OUTPUT."""
    if ENABLE_OUTPUT:
        print(*args, **kwargs)


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configura um logger com saída exclusiva em arquivo.

    Args:
        name: Nome do logger
        log_file: Caminho do arquivo de log
        level: Nível de logging

    Returns:
        Logger configurado
    """
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    # delay=True: o arquivo só é aberto no primeiro registro
    file_handler = logging.FileHandler(log_file, encoding='utf-8', delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger


BASE_DIR = Path(__file__).parent.parent
LOGS_DIR = BASE_DIR / "logs"

LOG_FILES = {
    "transactions": LOGS_DIR / "transactions.log",
    "entradas": LOGS_DIR / "entradas.log",
    "saidas": LOGS_DIR / "saidas.log",
    "producao": LOGS_DIR / "producao.log",
    "database": LOGS_DIR / "database.log",
    "system": LOGS_DIR / "system.log",
}

transaction_logger = setup_logger('insumos.transactions', str(LOG_FILES["transactions"]))
entrada_logger = setup_logger('insumos.entradas', str(LOG_FILES["entradas"]))
saida_logger = setup_logger('insumos.saidas', str(LOG_FILES["saidas"]))
producao_logger = setup_logger('insumos.producao', str(LOG_FILES["producao"]))
database_logger = setup_logger('insumos.database', str(LOG_FILES["database"]))
system_logger = setup_logger('insumos.system', str(LOG_FILES["system"]))


def log_transaction(operation: str, data: Dict[str, Any], result: Optional[Any] = None, error: Optional[str] = None) -> None:
    """
    Registra uma transação completa (sucesso ou falha).

    Args:
        operation: Tipo de operação (entrada, saida, producao_inicio, ...)
        data: Dados de entrada da operação
        result: Resultado da operação (opcional)
        error: Mensagem de erro (opcional)
    """
    if not ENABLE_LOGGING:
        return
    if error:
        transaction_logger.error(f"TRANSACTION_FAILED: {operation} - {error} - Data: {data}")
    else:
        transaction_logger.info(f"TRANSACTION_SUCCESS: {operation} - Result: {result} - Data: {data}")


def _log_movimento(logger: logging.Logger, prefixo: str, action: str, lote_id: Any, quantidade: Any, **kwargs) -> None:
    if not ENABLE_LOGGING:
        return
    log_data = {"action": action, "lote_id": lote_id, "quantidade": quantidade, **kwargs}
    logger.info(f"{prefixo}_{action.upper()}: {log_data}")


def log_entrada(action: str, lote_id: Any, quantidade: Any, **kwargs) -> None:
    """Log de entradas (recebimento e mescla em lote existente)."""
    _log_movimento(entrada_logger, "ENTRADA", action, lote_id, quantidade, **kwargs)


def log_saida(action: str, lote_id: Any, quantidade: Any, **kwargs) -> None:
    """Log de saídas (baixas de estoque)."""
    _log_movimento(saida_logger, "SAIDA", action, lote_id, quantidade, **kwargs)


def log_producao(action: str, lote_id: Any, quantidade: Any = 1, **kwargs) -> None:
    """Log de sessões de produção (início e finalização)."""
    _log_movimento(producao_logger, "PRODUCAO", action, lote_id, quantidade, **kwargs)


def log_database_operation(table: str, operation: str, affected_rows: int = 0, **kwargs) -> None:
    """
    Log de operações no banco de dados.

    Args:
        table: Nome da tabela
        operation: Operação SQL (INSERT, UPDATE, DELETE, SELECT)
        affected_rows: Número de linhas afetadas
        **kwargs: Dados adicionais
    """
    if not ENABLE_LOGGING:
        return
    log_data = {"table": table, "operation": operation, "affected_rows": affected_rows, **kwargs}
    database_logger.info(f"DB_{operation}: {log_data}")


def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """Log para eventos do sistema (level: info, warning, error)."""
    if not ENABLE_LOGGING:
        return
    log_data = {"event": event, "details": details or {}}
    log_method = getattr(system_logger, level.lower(), system_logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {log_data}")


def log_file_operation(operation: str, file_path: str, rows_processed: int = 0, **kwargs) -> None:
    """Log para importação de planilhas."""
    if not ENABLE_LOGGING:
        return
    log_data = {"operation": operation, "file_path": file_path, "rows_processed": rows_processed, **kwargs}
    system_logger.info(f"FILE_{operation.upper()}: {log_data}")


def get_log_summary(log_type: str = "transactions", lines: int = 100) -> str:
    """
    Obtém as últimas linhas de um log.

    Args:
        log_type: transactions, entradas, saidas, producao, database ou system
        lines: Número de linhas a retornar

    Returns:
        Conteúdo do log como string
    """
    log_file = LOG_FILES.get(log_type)
    if not log_file or not log_file.exists():
        return f"Log {log_type} não encontrado."

    with open(log_file, 'r', encoding='utf-8') as f:
        all_lines = f.readlines()
    return ''.join(all_lines[-lines:])
