"""Ticketing Domain Value Objects"""
