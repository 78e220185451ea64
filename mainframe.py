#!/usr/bin/env python3
"""
Launcher script for the back-office Terminal UI.

This script provides an easy way to launch the terminal user interface
from the command line.
"""

import sys

try:
    from backoffice.adapters.tui import main

    if __name__ == "__main__":
        print("🚀 Iniciando 出荷・マスタ管理 - Back-office Terminal UI...")
        main()

except ImportError as e:
    print(f"❌ Erro ao importar o TUI: {e}")
    print("📦 Certifique-se de que as dependências estão instaladas:")
    print("   pip install textual")
    sys.exit(1)
except KeyboardInterrupt:
    print("\n👋 Saindo do sistema...")
    sys.exit(0)
