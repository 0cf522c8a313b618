# ./src/memocache/utils/__init__.py
