"""
Entry point for deployment.
Imports the FastAPI app from the docdrop package.
"""

from docdrop.main import app, run

if __name__ == "__main__":
    run()
