from tuido.main import main

main()
