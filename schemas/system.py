"""
System information and status schemas
"""
from pydantic import BaseModel


class BackendStatus(BaseModel):
    """Backend API status"""
    status: str  # 'connected' or 'error'
    latency: int  # milliseconds
    version: str


class DatabaseStatus(BaseModel):
    """Database status"""
    status: str
    connected: bool
    dialect: str
    sidebar_items: int = 0


class SystemStatusResponse(BaseModel):
    """System status response"""
    backend: BackendStatus
    database: DatabaseStatus
