"""Application layer interfaces (Ports)"""
