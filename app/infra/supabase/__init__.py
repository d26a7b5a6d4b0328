"""Supabase infrastructure module"""
from .client import get_repositories, get_supabase_client, reset_supabase_client

__all__ = ['get_repositories', 'get_supabase_client', 'reset_supabase_client']
