"""Embedding providers for vector generation."""

from manualpack.embedders.sentence_transformer import SentenceTransformerEmbedder

__all__ = ["SentenceTransformerEmbedder"]
