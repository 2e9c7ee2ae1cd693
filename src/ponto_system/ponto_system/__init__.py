"""Ponto (time clock) package.

Organized by feature modules (users, clock) with a thin Flask controller layer
on top of service/repository layers.
"""
