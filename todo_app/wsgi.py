"""
Deployment entrypoints.

``handler`` is the AWS Lambda function handler: Mangum translates API
Gateway / Lambda function URL events into ASGI calls on the same app that
``uvicorn todo_app.main:app`` serves. Mangum runs the lifespan hook
around each invocation, so the tasks table exists before any request.
"""
from mangum import Mangum

from todo_app.main import app

handler = Mangum(app, lifespan="auto")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
