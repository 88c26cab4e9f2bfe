"""
Criação de views auxiliares para consultas frequentes.

Views criadas:
- vw_lotes_detalhe:  lote com nomes de fornecedor/categoria e rótulo de conversão.
- vw_saidas_detalhe: saídas com o nome atual do fornecedor do lote.

Obs.:
- As views assumem que as migrações V1→V2 já foram aplicadas.
- Um conjunto de índices úteis também é criado, caso não existam.
"""

from __future__ import annotations

from .db import connect


def create_views(db_path: str) -> None:
    with connect(db_path) as c:
        # -----------------------
        # Views (drop + create)
        # -----------------------
        c.executescript(
            """
            ---------------------------
            -- Detalhe de lotes
            ---------------------------
            DROP VIEW IF EXISTS vw_lotes_detalhe;
            CREATE VIEW vw_lotes_detalhe AS
            SELECT
                e.id,
                e.produto,
                e.fornecedor_id,
                f.nome              AS fornecedor_nome,
                e.categoria_id,
                c.nome              AS categoria_nome,
                c.tipo_unidade      AS tipo_unidade,
                e.pacotes,
                e.unidades_avulsas,
                e.total_unidades,
                e.custo_por_pacote,
                e.estoque_minimo,
                date(e.ultima_entrada) AS ultima_entrada
            FROM estoque e
            LEFT JOIN fornecedores f ON f.id = e.fornecedor_id
            LEFT JOIN categorias  c ON c.id = e.categoria_id;

            ---------------------------
            -- Detalhe de saídas
            -- produto_nome é o nome congelado no momento da baixa
            ---------------------------
            DROP VIEW IF EXISTS vw_saidas_detalhe;
            CREATE VIEW vw_saidas_detalhe AS
            SELECT
                s.id,
                date(s.data)     AS data,
                s.lote_id,
                s.produto_nome,
                f.nome           AS fornecedor_nome,
                s.total_unidades,
                s.custo_total,
                s.destino
            FROM saidas s
            LEFT JOIN estoque e      ON e.id = s.lote_id
            LEFT JOIN fornecedores f ON f.id = e.fornecedor_id;
            """
        )

        # --------------------------------
        # Índices úteis (IF NOT EXISTS)
        # --------------------------------
        c.executescript(
            """
            CREATE INDEX IF NOT EXISTS idx_estoque_produto   ON estoque(produto);
            CREATE INDEX IF NOT EXISTS idx_estoque_categoria ON estoque(categoria_id);
            CREATE INDEX IF NOT EXISTS idx_saidas_data       ON saidas(data);
            CREATE INDEX IF NOT EXISTS idx_saidas_lote       ON saidas(lote_id);
            CREATE INDEX IF NOT EXISTS idx_uso_lote          ON uso_producao(lote_id);
            CREATE INDEX IF NOT EXISTS idx_uso_status        ON uso_producao(status);
            """
        )
