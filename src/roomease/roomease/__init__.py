"""RoomEase package.

This package is organized by feature modules (users, rooms, staff, transfers,
notifications, ...) with a thin Flask controller layer and service/repository
layers over MySQL.
"""
