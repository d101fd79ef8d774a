from mobile_scaffold.cli import main

main()
