from backend.engine.gamesolver.encoder import encode_state
from backend.engine.gamesolver.solver import SearchResult, SearchStatus, Solver

__all__ = ["SearchResult", "SearchStatus", "Solver", "encode_state"]
