# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py migrate --db insumos.db
  python app.py categoria add "Cartão térmico" --tipo cartao
  python app.py entrada --produto "Etiqueta X" --categoria 1 --pacotes 1 --custo 1000
  python app.py saida --lote 1 --quantidade 4600
  python app.py producao iniciar --lote 1
  python app.py dashboard
  python app.py entrada-lotes recebimentos.xlsx
"""

from insumos.adapters.cli import main

if __name__ == "__main__":
    main()
