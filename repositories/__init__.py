"""Supabase persistence for requests, companies and couriers."""
