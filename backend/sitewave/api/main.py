from fastapi import APIRouter

from sitewave.api.routes import (
    admin_blog,
    ai,
    analytics,
    authors,
    blog,
    categories,
    contact,
    email,
    login,
    services,
    tags,
    users,
    utils,
    views,
)

api_router = APIRouter()
api_router.include_router(login.router, tags=["login"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(utils.router)

# Public site
api_router.include_router(blog.router, prefix="/blog", tags=["blog"])
api_router.include_router(services.public_router, prefix="/services", tags=["services"])
api_router.include_router(contact.router, prefix="/contact", tags=["contact"])
api_router.include_router(views.router, prefix="/views", tags=["views"])

# Admin panel
api_router.include_router(users.admin_router, prefix="/admin/users", tags=["admin"])
api_router.include_router(ai.image_router, prefix="/admin/blog", tags=["admin", "ai"])
api_router.include_router(admin_blog.router, prefix="/admin/blog", tags=["admin"])
api_router.include_router(categories.router, prefix="/admin/categories", tags=["admin"])
api_router.include_router(authors.router, prefix="/admin/authors", tags=["admin"])
api_router.include_router(tags.router, prefix="/admin/tags", tags=["admin"])
api_router.include_router(services.router, prefix="/admin/services", tags=["admin"])
api_router.include_router(
    contact.admin_router, prefix="/admin/contact-submissions", tags=["admin"]
)
api_router.include_router(analytics.router, prefix="/admin/analytics", tags=["admin"])
api_router.include_router(email.router, prefix="/email", tags=["email"])
api_router.include_router(ai.router, prefix="/ai", tags=["ai"])
