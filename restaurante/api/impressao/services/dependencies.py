from fastapi import Request

from restaurante.api.impressao.services.gerenciador_conexao import GerenciadorConexaoImpressora


def get_gerenciador_impressora(request: Request) -> GerenciadorConexaoImpressora:
    """Gerenciador criado no startup da aplicação (ver restaurante.main)."""
    return request.app.state.gerenciador_impressora
