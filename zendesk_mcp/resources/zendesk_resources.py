import logging

from zendesk_mcp.resources.registry import resource_registry
from zendesk_mcp.core.zendesk_client import ZendeskClient

logger = logging.getLogger(__name__)

# Zendesk search syntax for tickets touched in the last day
RECENT_TICKETS_QUERY = "updated>24hours"


@resource_registry.register(
    uri="zendesk://tickets/recent",
    name="Recent Tickets",
    description="List of recently updated tickets",
)
def recent_tickets(client: ZendeskClient):
    logger.info("Reading recent tickets")
    return client.search_tickets(RECENT_TICKETS_QUERY)


@resource_registry.register(
    uri="zendesk://users/agents",
    name="Active Agents",
    description="List of active support agents",
)
def active_agents(client: ZendeskClient):
    logger.info("Reading active agents")
    return client.list_users(role="agent")
