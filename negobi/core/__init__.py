"""Configuration, logging, errors and the backend HTTP boundary"""
