"""Custom column and schema types"""
