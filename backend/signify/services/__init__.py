"""Signify - Services"""
