"""
Raw Dog Meal Planner API - Main Application

Plans raw-food diets for dogs: a food inventory with package prices, dog
profiles with estimated daily portions, and meal plans that allocate foods
across a multi-day, multi-meal schedule with exact cost tracking.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.database import init_db
from app.core.logging_utils import configure_logging
from app.api import dogs, inventory, planner, plans, preferences

configure_logging(settings.LOG_LEVEL)

# Create database tables
init_db()

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="""
    ## Raw Dog Meal Planner API

    Plan raw-food diets and what they cost.

    ### Features
    - Food inventory with package weight and cost
    - Daily portion estimates from weight, age and activity level
    - Meal plans with per-item quantities, meal counts and exact decimal costs
    - Interactive plan editing with undo/redo

    ### Core Endpoints
    - `/inventory` - Manage foods
    - `/dog` - Manage dog profiles and estimate portions
    - `/preferences` - Display units, currency and planner defaults
    - `/mealplans` - Saved meal plans
    - `/planner` - Interactive plan editing sessions
    """,
    version="1.0.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(inventory.router)
app.include_router(dogs.router)
app.include_router(preferences.router)
app.include_router(plans.router)
app.include_router(planner.router)


@app.get("/")
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "inventory": "/inventory",
            "dogs": "/dog",
            "preferences": "/preferences",
            "mealplans": "/mealplans",
            "planner": "/planner",
        }
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
