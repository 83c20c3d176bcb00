"""Streamlit front-end."""
