from create_o3_app.cli import main

if __name__ == "__main__":
    main()
