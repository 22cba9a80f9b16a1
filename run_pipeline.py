# -*- coding: utf-8 -*-
"""
Execução do Pipeline de Análise de Redes Espaciais

Este script inicia a execução do pipeline: carrega as ruas, constrói o grafo
e gera relatórios e visualizações. Os argumentos são repassados para
spatial_network.main.
"""

import os
import sys
from datetime import datetime

# Adicionar src/ ao PATH quando o pacote não estiver instalado
src_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")
if src_dir not in sys.path:
    sys.path.append(src_dir)

from spatial_network.main import main

if __name__ == "__main__":
    timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
    print("===== INÍCIO DA EXECUÇÃO DO PIPELINE DE REDES ESPACIAIS =====")
    print(f"Data e hora: {timestamp}")

    exit_code = main(sys.argv[1:])

    print("===== EXECUÇÃO CONCLUÍDA =====" if exit_code == 0 else "===== EXECUÇÃO FALHOU =====")
    sys.exit(exit_code)
