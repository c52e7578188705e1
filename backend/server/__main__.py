"""Run the API: python -m server"""

import uvicorn

from server.config import PORT


def main():
    uvicorn.run("server.main:app", host="127.0.0.1", port=PORT)


if __name__ == "__main__":
    main()
