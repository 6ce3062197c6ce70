from account_upgrade.runtime.runner import main

if __name__ == "__main__":
    main()
