import runpy
import traceback

def main():
    try:
        # Equivalent to: python -m api_server.api_server
        runpy.run_module("api_server.api_server", run_name="__main__")
    except Exception:
        traceback.print_exc()
        input("\nPress Enter to exit...")

if __name__ == "__main__":
    main()
