from fastapi import APIRouter
from app.api.v1.endpoints import (
    auth, users, clients, projects, tasks, internships, applications,
    internship_listings, certificates, bills, contacts, messages, resources,
    internship_roles, email, ai, health, intern,
)

api_router = APIRouter()

# Liveness and readiness (use /health/ready for the load balancer)
api_router.include_router(health.router)

api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(clients.router)
api_router.include_router(projects.router)
api_router.include_router(tasks.router)

# Internship pipeline: listings -> applications -> internships -> certificates
api_router.include_router(internship_listings.router)
api_router.include_router(applications.router)
api_router.include_router(internships.router)
api_router.include_router(certificates.router)
api_router.include_router(internship_roles.router)
api_router.include_router(intern.router)

api_router.include_router(bills.router)
api_router.include_router(contacts.router)
api_router.include_router(messages.router)
api_router.include_router(resources.router)
api_router.include_router(email.router)
api_router.include_router(ai.router)
