from aiohttp import web

from cordauth import OAuth2Client, OAuth2Scope
from cordauth.errors import HTTPException

client = OAuth2Client.from_env([OAuth2Scope.IDENTIFY, OAuth2Scope.GUILDS])


async def login(request):
    raise web.HTTPFound(client.get_authorize_url(state="login"))


async def callback(request):
    token = await client.exchange_code(request.query["code"])
    session = client.create_session(token)
    try:
        user = await session.fetch_user()
        guilds = await session.fetch_guilds()
    except HTTPException as e:
        return web.Response(status=502, text=e.message)
    return web.Response(text=f"Hello {user['username']}, you are in {len(guilds)} guilds.")


async def on_cleanup(app):
    await client.close()


app = web.Application()
app.router.add_get("/login", login)
app.router.add_get("/callback", callback)
app.on_cleanup.append(on_cleanup)

web.run_app(app, port=8080)
