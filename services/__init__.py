"""Service layer: clients, equipment, service orders and dashboard figures.

Submodules are not imported here so that ``import services`` stays cheap
(the summary service pulls in the OpenAI SDK).  Import what you need
directly, e.g.::

    from services.orders import order_service
    from services.clients.client_service import list_clients
"""
