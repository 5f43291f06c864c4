from fastapi import APIRouter

from hotel_api.api.routes import health, hotels, rooms, bookings, offers, testimonials, newsletter, dashboard, uploads

api_router = APIRouter(prefix="/api")
api_router.include_router(health.router, prefix="/health", tags=["health"])  # GET
api_router.include_router(hotels.router, prefix="/hotels", tags=["hotels"])
api_router.include_router(rooms.router, prefix="/rooms", tags=["rooms"])  # search, quote, owner CRUD
api_router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])  # guest + admin lifecycle
api_router.include_router(offers.router, prefix="/offers", tags=["offers"])
api_router.include_router(testimonials.router, prefix="/testimonials", tags=["testimonials"])
api_router.include_router(newsletter.router, prefix="/newsletter", tags=["newsletter"])
api_router.include_router(dashboard.router, prefix="/owner", tags=["owner"])  # GET /dashboard
api_router.include_router(uploads.router, prefix="/upload", tags=["upload"])  # POST multipart 'image'
