from cactus.cli.app import main

main()
