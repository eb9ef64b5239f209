"""
Recurring Notion Tasks Server
Reads Notion database schemas and creates one page per generated task
"""
import os
import traceback
from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from exceptions import TaskSenderError
from models import LegacyWriteRequest, RemoteSchema, SchemaRequest, SchemaWriteRequest, WriteResult
from notion_api import DEFAULT_NOTION_VERSION, NotionClientGateway, NotionGateway
from task_sender import LegacyTaskSender, SchemaTaskSender, TaskSender

# Load environment
load_dotenv()

app = FastAPI(title="Recurring Notion Tasks")

# Configuration (Notion credentials always come with the request)
NOTION_VERSION = os.getenv("NOTION_VERSION", DEFAULT_NOTION_VERSION)

MISSING_FIELDS = "⚠️ API Key, Database ID or tasks missing."
MISSING_CREDENTIALS = "⚠️ API Key and Database ID are required."


def get_gateway() -> NotionGateway:
    return NotionClientGateway(notion_version=NOTION_VERSION)


def bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": True, "message": message})


@app.exception_handler(TaskSenderError)
async def task_sender_error_handler(request: Request, exc: TaskSenderError):
    print(f"❌ {exc.message}")
    if exc.details:
        print(f"   Details: {exc.details}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    print(f"❌ Unexpected error: {exc}")
    traceback.print_exc()
    return JSONResponse(
        status_code=500,
        content={"error": True, "message": "❌ Server error", "details": str(exc)}
    )


async def send_batch(sender: TaskSender, gateway: NotionGateway, database_id: str,
                     credential: str) -> WriteResult:
    print(f"📄 Sending {len(sender.tasks)} task(s) to database {database_id}...")
    created = await sender.send(gateway, database_id, credential)
    print(f"✅ Created {created} page(s)")
    return WriteResult(message="✅ Tasks sent to Notion!", created=created)


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "Recurring Notion Tasks",
        "version": "1.0.0"
    }


@app.get("/health")
async def health():
    """Detailed health check"""
    return {
        "status": "healthy",
        "notion_version": NOTION_VERSION
    }


@app.post("/api/notion/schema", response_model=RemoteSchema)
async def read_schema(body: SchemaRequest, gateway: NotionGateway = Depends(get_gateway)):
    """Read the properties of a Notion database"""
    if not body.database_id or not body.api_key:
        return bad_request(MISSING_CREDENTIALS)

    print(f"🔍 Reading schema of database {body.database_id}")
    schema = await gateway.read_schema(body.database_id, body.api_key)
    print(f"✓ Found {len(schema.properties)} properties")
    return schema


@app.post("/api/notion/tasks", response_model=WriteResult)
async def send_generated_tasks(body: SchemaWriteRequest,
                               gateway: NotionGateway = Depends(get_gateway)):
    """Create one page per generated task using the chosen property mapping"""
    if not body.database_id or not body.api_key or body.tasks is None:
        return bad_request(MISSING_FIELDS)

    sender = SchemaTaskSender(body.mapping, body.tasks, body.defaults)
    return await send_batch(sender, gateway, body.database_id, body.api_key)


@app.post("/api/notion", response_model=WriteResult)
async def send_text_tasks(body: LegacyWriteRequest, gateway: NotionGateway = Depends(get_gateway)):
    """Create one page per '<title> — dd/mm/yyyy' line"""
    if not body.database_id or not body.api_key or body.tasks is None:
        return bad_request(MISSING_FIELDS)

    sender = LegacyTaskSender(body.tasks)
    return await send_batch(sender, gateway, body.database_id, body.api_key)


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "0.0.0.0")
    print(f"🚀 Starting server on port {port}")
    print(f"📍 Schema URL: http://localhost:{port}/api/notion/schema")
    uvicorn.run(app, host=host, port=port)
