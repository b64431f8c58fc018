from .gerenciador_conexao import GerenciadorConexaoImpressora
from .service_recibo import renderizar_recibo

__all__ = ["GerenciadorConexaoImpressora", "renderizar_recibo"]
