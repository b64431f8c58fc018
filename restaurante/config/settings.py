import os
from dotenv import load_dotenv
from pathlib import Path

# Carrega o .env manualmente se estiver fora do Docker
if not os.getenv("RUNNING_IN_DOCKER"):
    dotenv_path = Path(__file__).resolve().parents[2] / ".env"
    load_dotenv(dotenv_path=dotenv_path)

# Banco de dados (qualquer URL aceita pelo SQLAlchemy)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./restaurante.db")
DB_ECHO = os.getenv("DB_ECHO", "false").lower() in ("1", "true", "yes")

# Fuso horário padrão das empresas (todas as contas de minuto usam o fuso da empresa)
TIMEZONE_PADRAO = os.getenv("TIMEZONE_PADRAO", "America/Sao_Paulo")

# CORS
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
CORS_ALLOW_ALL = os.getenv("CORS_ALLOW_ALL", "false").lower() in ("1", "true", "yes")

# FastAPI / App
BASE_URL = os.getenv("BASE_URL", "")
ENABLE_DOCS = os.getenv("ENABLE_DOCS", "true").lower() in ("1", "true", "yes")

# Agente de impressão (serviço local que fala com as impressoras térmicas)
PRINT_AGENT_URL = os.getenv("PRINT_AGENT_URL", "http://localhost:8182")
PRINT_AGENT_TIMEOUT_SECONDS = float(os.getenv("PRINT_AGENT_TIMEOUT_SECONDS", 5))
IMPRESSORA_PADRAO = os.getenv("IMPRESSORA_PADRAO") or None
LARGURA_RECIBO_COLUNAS = int(os.getenv("LARGURA_RECIBO_COLUNAS", 32))  # 58mm
