"""Gradio front-end for Nail Studio."""
