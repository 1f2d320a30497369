"""Streamlit entry point: ``streamlit run streamlit_app.py``."""

from app import main

main()
