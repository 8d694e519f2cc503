from aiohttp import web


async def success(request):
    """Where stripe sends the user after paying."""
    return web.Response(
        text="<h1>Payment Successful!</h1><p>Thank you for your purchase.</p>",
        content_type="text/html"
    )


async def cancel(request):
    return web.Response(
        text="<h1>Payment Canceled</h1><p>The payment was canceled.</p>",
        content_type="text/html"
    )
