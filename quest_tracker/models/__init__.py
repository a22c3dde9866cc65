"""Pydantic models for game state, achievements, challenges and suggestions"""
