# Package initializer for the room signage service.

"""
The `signage` package contains all modules for the room signage service.

Modules:

- ``config``: application settings loaded from environment variables.
- ``models``: Pydantic data models for rooms, schedules and display state.
- ``engine``: status resolution, the pure core of the service.
- ``clock``: the offsettable simulated clock.
- ``store``: in-memory room registry and schedule store.
- ``display``: status themes, floor labels and agenda helpers.
- ``demo``: demo rooms, bookings and background presets.
- ``main``: the FastAPI application definition.

"""
