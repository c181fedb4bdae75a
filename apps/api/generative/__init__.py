"""Generative-AI client, prompt building and response normalization."""
