import logging
from typing import Any, Dict, Optional, Sequence

from zendesk_mcp.tools.registry import registry
from zendesk_mcp.core.zendesk_client import DEFAULT_LIMIT, ZendeskClient

logger = logging.getLogger(__name__)

TICKET_STATUSES = ["new", "open", "pending", "hold", "solved", "closed"]
TICKET_PRIORITIES = ["low", "normal", "high", "urgent"]
TICKET_TYPES = ["problem", "incident", "question", "task"]
USER_ROLES = ["end-user", "agent", "admin"]


def _choice(value: Any, allowed: Sequence[str]) -> Optional[str]:
    """Optional enum argument; anything outside the enum is dropped."""
    return value if isinstance(value, str) and value in allowed else None


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _limit(value):
    # Whole numbers only (10.0 is rejected); values above the API page cap of 100
    # are forwarded unchanged and Zendesk clamps them
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return DEFAULT_LIMIT
    return value


@registry.register(
    name="search_tickets",
    description="Search for Zendesk tickets",
    input_schema={
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "Search query for tickets"
            },
            "status": {
                "type": "string",
                "description": "Filter by ticket status (new, open, pending, hold, solved, closed)",
                "enum": TICKET_STATUSES
            },
            "limit": {
                "type": "integer",
                "description": "Maximum number of results to return (default: 25)",
                "default": DEFAULT_LIMIT
            }
        },
        "required": ["query"]
    }
)
def search_tickets(client: ZendeskClient, arguments: Dict[str, Any]):
    query = arguments.get("query")
    status = _choice(arguments.get("status"), TICKET_STATUSES)
    limit = _limit(arguments.get("limit"))

    logger.info(f"Searching tickets: {query!r} status={status} limit={limit}")
    return client.search_tickets(query, status=status, limit=limit)


@registry.register(
    name="get_ticket",
    description="Get details of a specific ticket",
    input_schema={
        "type": "object",
        "properties": {
            "ticket_id": {
                "type": "integer",
                "description": "The ticket ID"
            }
        },
        "required": ["ticket_id"]
    }
)
def get_ticket(client: ZendeskClient, arguments: Dict[str, Any]):
    ticket_id = arguments.get("ticket_id")

    logger.info(f"Fetching ticket {ticket_id}")
    return client.get_ticket(ticket_id)


@registry.register(
    name="create_ticket",
    description="Create a new ticket",
    input_schema={
        "type": "object",
        "properties": {
            "subject": {
                "type": "string",
                "description": "Ticket subject"
            },
            "description": {
                "type": "string",
                "description": "Ticket description/body"
            },
            "requester_email": {
                "type": "string",
                "description": "Email of the requester"
            },
            "priority": {
                "type": "string",
                "description": "Ticket priority",
                "enum": TICKET_PRIORITIES
            },
            "type": {
                "type": "string",
                "description": "Ticket type",
                "enum": TICKET_TYPES
            }
        },
        "required": ["subject", "description", "requester_email"]
    }
)
def create_ticket(client: ZendeskClient, arguments: Dict[str, Any]):
    logger.info(f"Creating ticket for {arguments.get('requester_email')}")
    return client.create_ticket(
        arguments.get("subject"),
        arguments.get("description"),
        arguments.get("requester_email"),
        priority=_choice(arguments.get("priority"), TICKET_PRIORITIES),
        type=_choice(arguments.get("type"), TICKET_TYPES),
    )


@registry.register(
    name="update_ticket",
    description="Update an existing ticket",
    input_schema={
        "type": "object",
        "properties": {
            "ticket_id": {
                "type": "integer",
                "description": "The ticket ID"
            },
            "status": {
                "type": "string",
                "description": "New ticket status",
                "enum": TICKET_STATUSES
            },
            "priority": {
                "type": "string",
                "description": "New ticket priority",
                "enum": TICKET_PRIORITIES
            },
            "comment": {
                "type": "string",
                "description": "Add a comment to the ticket"
            }
        },
        "required": ["ticket_id"]
    }
)
def update_ticket(client: ZendeskClient, arguments: Dict[str, Any]):
    ticket_id = arguments.get("ticket_id")

    logger.info(f"Updating ticket {ticket_id}")
    return client.update_ticket(
        ticket_id,
        status=_choice(arguments.get("status"), TICKET_STATUSES),
        priority=_choice(arguments.get("priority"), TICKET_PRIORITIES),
        comment=_text(arguments.get("comment")),
    )


@registry.register(
    name="list_users",
    description="List Zendesk users",
    input_schema={
        "type": "object",
        "properties": {
            "role": {
                "type": "string",
                "description": "Filter by user role",
                "enum": USER_ROLES
            },
            "limit": {
                "type": "integer",
                "description": "Maximum number of results (default: 25)",
                "default": DEFAULT_LIMIT
            }
        }
    }
)
def list_users(client: ZendeskClient, arguments: Dict[str, Any]):
    role = _choice(arguments.get("role"), USER_ROLES)
    limit = _limit(arguments.get("limit"))

    logger.info(f"Listing users role={role} limit={limit}")
    return client.list_users(role=role, limit=limit)
