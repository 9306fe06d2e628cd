"""Maximum gamma-quasi-clique search on undirected graphs, with graph format conversion."""

__version__ = "0.1.0"