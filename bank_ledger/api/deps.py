"""
Bank system dependency for request handlers
"""

from fastapi import Request

from ..system import BankSystem


def get_bank_system(request: Request) -> BankSystem:
    """Bank system owned by the running application"""
    return request.app.state.bank_system
