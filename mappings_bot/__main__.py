from mappings_bot.main import main

main()
