[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sockdemo"
version = "0.1.0"
description = "Small TCP socket programs: broadcast relay, turn-based chat, line client, file transfer and a readers-writers server"
requires-python = ">=3.10"
dependencies = []
keywords = ["socket", "tcp", "chat", "broadcast", "file-transfer", "readers-writers", "selectors"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sockdemo-broadcast = "sockdemo.broadcast:main"
sockdemo-chat-client = "sockdemo.chat:main_client"
sockdemo-chat-server = "sockdemo.chat:main_server"
sockdemo-line-client = "sockdemo.lineclient:main"
sockdemo-file-server = "sockdemo.filetransfer:main_server"
sockdemo-file-client = "sockdemo.filetransfer:main_client"
sockdemo-rw-server = "sockdemo.readerswriters:main"

[tool.hatch.build.targets.wheel]
packages = ["sockdemo"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
