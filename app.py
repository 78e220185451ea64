# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py history --search ミネラル --status 納品完了
  python app.py customer-history --range 6months
  python app.py schedule --week-of 2025-04-14
  python app.py master product --name "テスト製品" --category 飲料 --generate-code
  python app.py pallet jpr --item 1:80 --send
  python app.py export historico.csv
  python app.py tui
"""

from backoffice.adapters.cli import main

if __name__ == "__main__":
    main()
